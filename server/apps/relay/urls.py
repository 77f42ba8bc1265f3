from django.urls import path

from server.apps.relay import views

app_name = 'relay'

urlpatterns = [
    path('upload', views.upload, name='upload'),
    path('i/<str:filename>', views.download, name='download'),
]
