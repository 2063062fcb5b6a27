"""REST API plumbing: response envelope, pagination, permissions and serializers."""
