from django.urls import path, include

urlpatterns = [
    path('api/v1/fares/', include('fares_api.urls')),
]
