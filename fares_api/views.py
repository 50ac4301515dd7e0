import logging
from functools import lru_cache

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from booking.redirector import Redirector
from comparison.aggregator import default_aggregator
from fares.models import ProviderId
from .serializers import BookingLinkSerializer, CompareFaresSerializer

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def shared_aggregator():
    """
    One aggregator per process. It keeps no per-request state, so every
    request reuses the same Namma Yatri client and its HTTP session.
    """
    return default_aggregator()


class CompareFaresView(APIView):
    """
    Compare every provider for one trip.
    - Public, stateless
    - Always 200 for a valid body; unavailable providers just don't appear
    """
    authentication_classes = []
    permission_classes = [permissions.AllowAny]
    aggregator_factory = staticmethod(shared_aggregator)

    def post(self, request):
        serializer = CompareFaresSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        route, pickup, destination = serializer.to_domain()
        estimates = self.aggregator_factory().compare_fares(route, pickup, destination)

        logger.info("Compared fares %r -> %r: %d options", pickup.address, destination.address, len(estimates))
        return Response([estimate.to_dict() for estimate in estimates])


class BookingLinkView(APIView):
    """
    Resolve the URLs the client should open to book the selected option.
    """
    authentication_classes = []
    permission_classes = [permissions.AllowAny]
    redirector_factory = Redirector

    def post(self, request):
        serializer = BookingLinkSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        action = self.redirector_factory().resolve_for(
            ProviderId(data["providerId"]),
            serializer.booking_ref(),
            data["pickup"],
            data["destination"],
        )
        return Response(action.to_dict())
