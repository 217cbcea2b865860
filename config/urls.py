from django.urls import include, path

urlpatterns = [
    path("api/calendar/", include("workcalendar.urls")),
    path("api/", include("conflicts.urls")),
]
