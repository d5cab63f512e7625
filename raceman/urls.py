from django.urls import path

from raceman import views

app_name = 'raceman'

urlpatterns = [
    path("api/send-email", views.send_email, name="send_email"),
]
