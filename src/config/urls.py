from django.urls import include, path

urlpatterns = [
    path("", include("modules.core.urls")),
    path("", include("modules.products.urls")),
]
