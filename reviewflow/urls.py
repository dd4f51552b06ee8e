from django.urls import include, path

urlpatterns = [
    path('', include('reviewflow.api.urls')),
]
