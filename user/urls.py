from django.urls import path
from . import views

app_name = 'user'

urlpatterns = [
    path('', views.LandingPage.as_view(), name='landing'),

    # Authentication
    path('login/', views.Login.as_view(), name='login'),
    path('register/', views.RegisterPage.as_view(), name='register'),
    path('logout/', views.logout_view, name='logout'),

    # Profile
    path('profile/', views.ProfilePage.as_view(), name='profile'),
    path('profile/update/', views.UpdateProfile.as_view(), name='update_profile'),
    path('profile/delete/', views.DeleteAccount.as_view(), name='delete_account'),

    # Driver cabs
    path('cabs/', views.CabList.as_view(), name='cabs'),
    path('cabs/add/', views.AddCab.as_view(), name='add_cab'),
]
