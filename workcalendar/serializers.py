from rest_framework import serializers


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    day_of_week = serializers.IntegerField()
    week_of_month = serializers.IntegerField()
    is_non_working = serializers.BooleanField()
    non_working_reason = serializers.CharField(allow_null=True)
    is_holiday = serializers.BooleanField()
    comp_off_eligible = serializers.BooleanField()


class CalendarMonthSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    days = CalendarDaySerializer(many=True)
