from django.contrib import admin
from django.urls import path, include

# Main URL configuration
urlpatterns = [
    path('admin/', admin.site.urls),
]

# JSON API (no language prefix, the client calls /api/...)
urlpatterns += [
    path('api/', include('store.urls')),
]
