from django.urls import path
from .views import ListUsersView, MeView

app_name = 'users'

urlpatterns = [
    path("", ListUsersView.as_view(), name="list-users"),
    path("me/", MeView.as_view(), name="me"),
]
