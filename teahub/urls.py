"""
URL configuration for teahub project.

The TEA API is served from the site root, e.g. ``/product`` and
``/collection/<uuid>``.
"""

from django.contrib import admin
from django.urls import path

from .apis import api

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", api.urls),
]
