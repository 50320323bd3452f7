from django.urls import path
from authentication.views import sign_up, sign_in, sign_out

app_name = 'authentication'

urlpatterns = [
   path("sign-up/", sign_up, name="sign_up"),
   path("sign-in/", sign_in, name="sign_in"),
   path("sign-out/", sign_out, name="sign_out"),
]
