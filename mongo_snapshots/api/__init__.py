"""HTTP management API for mongo-snapshots."""
