from rest_framework import serializers


class FlightSearchSerializer(serializers.Serializer):
    """Search criteria are forwarded to the flight API as given."""

    provider = serializers.ChoiceField(choices=("all", "sabre", "amadeus"), default="all")

    def validate(self, attrs):
        attrs["criteria"] = {key: value for key, value in self.initial_data.items() if key != "provider"}
        return attrs


class SearchResultsSerializer(serializers.Serializer):
    folder = serializers.CharField()
    flight_type = serializers.CharField(required=False, allow_blank=True, default="")


class FlightBookingSerializer(serializers.Serializer):
    flight = serializers.DictField()
    passengers = serializers.ListField(child=serializers.DictField(), allow_empty=False)
    contact = serializers.DictField()
    lead_passenger = serializers.DictField(required=False, default=dict)


class TicketIssueSerializer(serializers.Serializer):
    selected_passengers = serializers.ListField(child=serializers.DictField(), allow_empty=True)


class AgeCheckSerializer(serializers.Serializer):
    type = serializers.CharField()
    dob = serializers.DateField()
    departure_date = serializers.DateField()
