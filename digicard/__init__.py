"""DigiCard: digital business cards with vCard export and QR sharing."""

__version__ = "0.1.0"
