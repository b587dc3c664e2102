"""
Wayfinder Engine Application Package.

Destination recommendations and photo location analytics featuring:
- Multi-factor destination scoring with travel-history personalization
- Travel profile aggregation from trips and photos
- Location clustering of geotagged photos
- Great-circle proximity search
"""

__version__ = "1.0.0"
__author__ = "Wayfinder Team"
