"""Ephemeral file storage service: expiring object store and its HTTP front."""
