from django.urls import path

from .views import BookingLinkView, CompareFaresView

urlpatterns = [
    path('compare/', CompareFaresView.as_view(), name='compare-fares'),
    path('booking-link/', BookingLinkView.as_view(), name='booking-link'),
]
