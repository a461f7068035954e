"""Exports config variables that are used throughout the code."""
import os


class FirestoreCollections:
    """Contains the names of the collections in the Firestore database."""

    listings = os.environ.get("FIRESTORE_LISTINGS_COLLECTION", "listings")


class FirestoreConfig:
    """Contains the config variables for the Firestore client."""

    project = os.environ.get("GOOGLE_CLOUD_PROJECT")
    database = os.environ.get("FIRESTORE_DATABASE")


class ListingsConfig:
    """Contains the rules applied to listings and listing queries."""

    # 3x3 grid
    page_size = int(os.environ.get("LISTINGS_PAGE_SIZE", 9))
    title_max_chars = int(os.environ.get("LISTINGS_TITLE_MAX_CHARS", 100))
    description_max_chars = int(os.environ.get("LISTINGS_DESCRIPTION_MAX_CHARS", 500))
    search_scan_warn_threshold = int(os.environ.get("LISTINGS_SEARCH_SCAN_WARN_THRESHOLD", 500))


class FirebaseAuthConfig:
    """Contains the config variables for Firebase Authentication."""

    api_key = os.environ.get("FIREBASE_API_KEY")
    project_id = os.environ.get("FIREBASE_PROJECT_ID")
    identity_toolkit_url = os.environ.get(
        "FIREBASE_IDENTITY_TOOLKIT_URL", "https://identitytoolkit.googleapis.com/v1"
    )
    request_timeout_seconds = float(os.environ.get("FIREBASE_AUTH_TIMEOUT_SECONDS", 10))


class ApiConfig:
    """Contains the config variables for the REST API."""

    max_page_size = int(os.environ.get("API_MAX_PAGE_SIZE", 50))
    requests_per_day = os.environ.get("API_REQUESTS_PER_DAY", "500")
    requests_per_hour = os.environ.get("API_REQUESTS_PER_HOUR", "100")
    requests_per_minute = os.environ.get("API_REQUESTS_PER_MINUTE", "10")
