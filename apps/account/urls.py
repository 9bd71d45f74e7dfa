from django.urls import path

from . import views

urlpatterns = [
    path('login', views.login, name='auth_login'),
    path('refresh-token', views.refresh_token, name='auth_refresh_token'),
    path('logout', views.logout, name='auth_logout'),
    path('change-password', views.change_password, name='auth_change_password'),
    path('register', views.register, name='auth_register'),
    path('profile', views.profile, name='auth_profile'),
]
