"""JSON API views grouped by audience: public, guest, owner, admin and integrations."""
