from rest_framework import serializers

from fares.models import BookingRef, Location, ProviderId, Route


class LocationSerializer(serializers.Serializer):
    address = serializers.CharField(allow_blank=True)
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)
    placeId = serializers.CharField(required=False, allow_blank=True, default="")

    def to_location(self, data) -> Location:
        return Location(
            address=data["address"],
            lat=data["lat"],
            lng=data["lng"],
            place_id=data.get("placeId", ""),
        )


class RouteSerializer(serializers.Serializer):
    # negative values are accepted here; the estimators clamp them to 0
    distanceMeters = serializers.FloatField()
    durationSeconds = serializers.FloatField()
    durationText = serializers.CharField(required=False, allow_blank=True, default="")

    def to_route(self, data) -> Route:
        return Route(
            distance_meters=data["distanceMeters"],
            duration_seconds=data["durationSeconds"],
            duration_text=data.get("durationText", ""),
        )


class CompareFaresSerializer(serializers.Serializer):
    """
    Request body for POST /api/v1/fares/compare/
    """
    route = RouteSerializer()
    pickup = LocationSerializer()
    destination = LocationSerializer()

    def to_domain(self):
        data = self.validated_data
        return (
            self.fields["route"].to_route(data["route"]),
            self.fields["pickup"].to_location(data["pickup"]),
            self.fields["destination"].to_location(data["destination"]),
        )


class BookingRefSerializer(serializers.Serializer):
    estimateId = serializers.CharField()
    searchId = serializers.CharField()


class BookingLinkSerializer(serializers.Serializer):
    """
    Request body for POST /api/v1/fares/booking-link/
    Pickup and destination are the address texts shown to the user.
    """
    providerId = serializers.ChoiceField(choices=[provider.value for provider in ProviderId])
    vehicleClass = serializers.CharField(required=False, allow_blank=True)
    bookingRef = BookingRefSerializer(required=False, allow_null=True)
    pickup = serializers.CharField(allow_blank=True)
    destination = serializers.CharField(allow_blank=True)

    def booking_ref(self):
        ref = self.validated_data.get("bookingRef")
        if not ref:
            return None
        return BookingRef(estimate_id=ref["estimateId"], search_id=ref["searchId"])
