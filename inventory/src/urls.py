"""
API Endpoint URL Constants

This module defines the URL paths used throughout the application
for accessing the fleet inventory resources.

These URLs are relative paths and are prefixed by the mount point of the
sub application (`/executive`, `/public`) serving them.
"""

# -------------------------------
# Authentication & Tokens
# -------------------------------
URL_EXECUTIVE_TOKEN = "/inventory/account/token"

# -------------------------------
# Seat layout templates
# -------------------------------
URL_BUS_DIAGRAM_MODEL = "/inventory/bus/diagram"
URL_BUS_DIAGRAM_MODEL_ZONE = "/inventory/bus/diagram/zone"
URL_BUS_SEAT_MODEL = "/inventory/bus/diagram/seat"
URL_BUS_SEAT_MODEL_REGENERATE = "/inventory/bus/diagram/seat/regenerate"

# -------------------------------
# Master data
# -------------------------------
URL_AMENITY = "/inventory/amenity"
