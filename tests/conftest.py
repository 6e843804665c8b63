import pytest

from haven.config import get_settings
from haven.models import (
    AmenityFlags,
    LegacyListing,
    NYCListing,
    SwipeRecord,
    UserPreferences,
)

CURRENT_YEAR = 2025

# Midtown Manhattan
USER_LOCATION = (40.7549, -73.9840)


def _images(n):
    return [f"https://images.example.com/{i}.jpg" for i in range(n)]


def _nyc(**kwargs):
    flags = kwargs.pop("flags", {})
    return NYCListing(amenities=AmenityFlags(**flags), **kwargs)


NYC_LISTINGS = [
    _nyc(
        id="1",
        title="Modern Studio in East Village",
        address="214 E 7th St, New York, NY 10009",
        neighborhood="East Village",
        price=2850,
        bedrooms=0,
        bathrooms=1,
        sqft=550,
        year_built=2015,
        latitude=40.7265,
        longitude=-73.9815,
        images=_images(3),
        description="Beautiful studio apartment in the heart of the East Village. Walking distance to NYU.",
        average_rating=4.5,
        total_ratings=2,
        flags={"washer_dryer_in_unit": True, "pets": True, "gym": True, "parking": True},
    ),
    _nyc(
        id="2",
        title="Spacious 2BR in Chelsea",
        address="301 W 22nd St, New York, NY 10011",
        neighborhood="Chelsea",
        price=5200,
        bedrooms=2,
        bathrooms=2,
        sqft=1200,
        year_built=1925,
        renovation_year=2019,
        latitude=40.7465,
        longitude=-74.0014,
        images=_images(3),
        description="Bright and airy 2-bedroom apartment with modern finishes. Great natural light and updated kitchen.",
        flags={
            "dishwasher": True,
            "ac": True,
            "gym": True,
            "parking": True,
            "outdoor_area": "Balcony",
            "view": "City",
        },
    ),
    _nyc(
        id="3",
        title="Cozy 1BR with Balcony",
        address="120 W 86th St, New York, NY 10024",
        neighborhood="Upper West Side",
        price=3400,
        bedrooms=1,
        bathrooms=1,
        sqft=750,
        year_built=1960,
        renovation_year=2021,
        latitude=40.7870,
        longitude=-73.9754,
        images=_images(3),
        description="Charming one-bedroom with private balcony overlooking the neighborhood. Recently renovated.",
        average_rating=4.0,
        total_ratings=5,
        flags={
            "washer_dryer_in_unit": True,
            "pets": True,
            "parking": True,
            "outdoor_area": "Balcony",
        },
    ),
    _nyc(
        id="4",
        title="Luxury 3BR Penthouse",
        address="56 Leonard St, New York, NY 10013",
        neighborhood="Tribeca",
        price=9500,
        bedrooms=3,
        bathrooms=2.5,
        sqft=1800,
        year_built=2018,
        latitude=40.7163,
        longitude=-74.0086,
        images=_images(6),
        description="Stunning penthouse with panoramic water views. High-end finishes and premium amenities throughout, "
        "private terrace, 24-hour concierge and a resident-only pool on the roof. Floor-to-ceiling windows "
        "in every room and a chef's kitchen with custom cabinetry.",
        average_rating=4.8,
        total_ratings=12,
        flags={
            "ac": True,
            "gym": True,
            "parking": True,
            "pool": True,
            "outdoor_area": "Terrace",
            "view": "Water",
        },
    ),
    _nyc(
        id="5",
        title="Affordable Studio in Astoria",
        address="31-10 Ditmars Blvd, Astoria, NY 11105",
        neighborhood="Astoria",
        price=1950,
        bedrooms=0,
        bathrooms=1,
        sqft=500,
        year_built=1940,
        latitude=40.7644,
        longitude=-73.9235,
        images=_images(3),
        description="Budget-friendly studio perfect for students. Close to the N/W trains and local shops.",
        flags={"pets": True, "parking": True},
    ),
    _nyc(
        id="6",
        title="Chic 2BR with Rooftop",
        address="90 N 11th St, Brooklyn, NY 11249",
        neighborhood="Williamsburg",
        price=4600,
        bedrooms=2,
        bathrooms=2,
        sqft=1300,
        year_built=2012,
        latitude=40.7081,
        longitude=-73.9571,
        images=_images(3),
        description="Stylish two-bedroom with access to shared rooftop. Modern design and great location.",
        flags={
            "washer_dryer_in_unit": True,
            "dishwasher": True,
            "ac": True,
            "gym": True,
            "parking": True,
            "outdoor_area": "Rooftop",
        },
    ),
    _nyc(
        id="7",
        title="Bright 1BR Garden Unit",
        address="412 7th Ave, Brooklyn, NY 11215",
        neighborhood="Park Slope",
        price=3100,
        bedrooms=1,
        bathrooms=1,
        sqft=800,
        year_built=1905,
        renovation_year=2010,
        latitude=40.6710,
        longitude=-73.9814,
        images=_images(3),
        description="Ground-floor unit with private garden access. Quiet neighborhood, perfect for working from home.",
        flags={
            "washer_dryer_in_unit": True,
            "pets": True,
            "parking": True,
            "outdoor_area": "Garden",
        },
    ),
    _nyc(
        id="8",
        title="Modern 4BR Townhouse",
        address="5600 Netherland Ave, Bronx, NY 10471",
        neighborhood="Riverdale",
        price=7200,
        bedrooms=4,
        bathrooms=3,
        sqft=2200,
        year_built=2008,
        latitude=40.8900,
        longitude=-73.9120,
        images=_images(3),
        description="Spacious family home with private yard. Perfect for roommates or families. Recently updated.",
        flags={
            "washer_dryer_in_unit": True,
            "dishwasher": True,
            "ac": True,
            "gym": True,
            "parking": True,
            "outdoor_area": "Yard",
        },
    ),
    _nyc(
        id="9",
        title="Efficient Studio Loft",
        address="27-28 Thomson Ave, Long Island City, NY 11101",
        neighborhood="Long Island City",
        price=2600,
        bedrooms=0,
        bathrooms=1,
        sqft=600,
        year_built=2020,
        latitude=40.7447,
        longitude=-73.9485,
        images=_images(3),
        description="Unique loft-style studio with high ceilings and open layout. Great for creative professionals.",
        flags={"washer_dryer_in_building": True, "pets": True, "parking": True, "view": "City"},
    ),
    _nyc(
        id="10",
        title="Updated 2BR with Views",
        address="345 E 77th St, New York, NY 10075",
        neighborhood="Upper East Side",
        price=4900,
        bedrooms=2,
        bathrooms=2,
        sqft=1250,
        year_built=1970,
        renovation_year=2022,
        latitude=40.7736,
        longitude=-73.9566,
        images=_images(3),
        description="Beautifully updated two-bedroom with stunning city views. Modern kitchen and spacious living area.",
        flags={
            "ac": True,
            "dishwasher": True,
            "gym": True,
            "parking": True,
            "outdoor_area": "Balcony",
            "view": "City",
        },
    ),
]

LEGACY_LISTINGS = [
    LegacyListing(
        id="1",
        title="Modern Studio in Westwood",
        address="1234 Westwood Blvd, Los Angeles, CA 90024",
        price=1850,
        bedrooms=0,
        bathrooms=1,
        sqft=550,
        images=_images(3),
        amenities=["In-unit laundry", "Parking", "Pet-friendly", "Gym"],
        description="Beautiful studio apartment in the heart of Westwood, perfect for students. Walking distance to UCLA campus.",
        available_from="2024-09-01",
    ),
    LegacyListing(
        id="2",
        title="Spacious 2BR Near Campus",
        address="5678 Gayley Ave, Los Angeles, CA 90024",
        price=3200,
        bedrooms=2,
        bathrooms=2,
        sqft=1200,
        images=_images(3),
        amenities=["Dishwasher", "AC", "Balcony", "Parking", "Gym"],
        description="Bright and airy 2-bedroom apartment with modern finishes. Great natural light and updated kitchen.",
        available_from="2024-08-15",
    ),
    LegacyListing(
        id="3",
        title="Cozy 1BR with Balcony",
        address="9012 Hilgard Ave, Los Angeles, CA 90024",
        price=2200,
        bedrooms=1,
        bathrooms=1,
        sqft=750,
        images=_images(3),
        amenities=["Balcony", "Parking", "Pet-friendly", "In-unit laundry"],
        description="Charming one-bedroom with private balcony overlooking the neighborhood. Recently renovated.",
        available_from="2024-09-01",
    ),
    LegacyListing(
        id="4",
        title="Luxury 3BR Penthouse",
        address="3456 Sunset Blvd, Los Angeles, CA 90028",
        price=5500,
        bedrooms=3,
        bathrooms=2.5,
        sqft=1800,
        images=_images(3),
        amenities=["Rooftop access", "Gym", "Pool", "Concierge", "Parking", "AC"],
        description="Stunning penthouse with panoramic city views. High-end finishes and premium amenities.",
        available_from="2024-10-01",
    ),
    LegacyListing(
        id="5",
        title="Affordable Studio Near Metro",
        address="7890 Santa Monica Blvd, Los Angeles, CA 90046",
        price=1650,
        bedrooms=0,
        bathrooms=1,
        sqft=500,
        images=_images(3),
        amenities=["Near transit", "Parking", "Pet-friendly"],
        description="Budget-friendly studio perfect for students. Close to public transportation and local shops.",
        available_from="2024-08-20",
    ),
    LegacyListing(
        id="6",
        title="Chic 2BR with Rooftop",
        address="2345 Melrose Ave, Los Angeles, CA 90046",
        price=3800,
        bedrooms=2,
        bathrooms=2,
        sqft=1300,
        images=_images(3),
        amenities=["Rooftop", "Gym", "Parking", "AC", "Dishwasher", "In-unit laundry"],
        description="Stylish two-bedroom with access to shared rooftop. Modern design and great location.",
        available_from="2024-09-15",
    ),
    LegacyListing(
        id="7",
        title="Bright 1BR Garden Unit",
        address="4567 Beverly Blvd, Los Angeles, CA 90048",
        price=2400,
        bedrooms=1,
        bathrooms=1,
        sqft=800,
        images=_images(3),
        amenities=["Garden access", "Parking", "Pet-friendly", "In-unit laundry"],
        description="Ground-floor unit with private garden access. Quiet neighborhood, perfect for working from home.",
        available_from="2024-08-25",
    ),
    LegacyListing(
        id="8",
        title="Modern 4BR House",
        address="6789 La Cienega Blvd, Los Angeles, CA 90035",
        price=6500,
        bedrooms=4,
        bathrooms=3,
        sqft=2200,
        images=_images(3),
        amenities=["Yard", "Parking", "Gym", "AC", "Dishwasher", "In-unit laundry"],
        description="Spacious family home with private yard. Perfect for roommates or families. Recently updated.",
        available_from="2024-09-01",
    ),
    LegacyListing(
        id="9",
        title="Efficient Studio Loft",
        address="3210 Venice Blvd, Los Angeles, CA 90019",
        price=1950,
        bedrooms=0,
        bathrooms=1,
        sqft=600,
        images=_images(3),
        amenities=["High ceilings", "Parking", "Pet-friendly", "Near transit"],
        description="Unique loft-style studio with high ceilings and open layout. Great for creative professionals.",
        available_from="2024-08-30",
    ),
    LegacyListing(
        id="10",
        title="Updated 2BR with Views",
        address="5432 Wilshire Blvd, Los Angeles, CA 90036",
        price=3400,
        bedrooms=2,
        bathrooms=2,
        sqft=1250,
        images=_images(3),
        amenities=["City views", "Gym", "Parking", "AC", "Dishwasher", "Balcony"],
        description="Beautifully updated two-bedroom with stunning city views. Modern kitchen and spacious living area.",
        available_from="2024-09-10",
    ),
]


def _swipes(pairs):
    return [SwipeRecord(listing_id=listing_id, liked=liked) for listing_id, liked in pairs]


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Cada test arranca con la configuración por defecto."""
    for name in ("TRAINING_SEED", "TOP_PICK_THRESHOLD", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def nyc_listings():
    return list(NYC_LISTINGS)


@pytest.fixture
def legacy_listings():
    return list(LEGACY_LISTINGS)


@pytest.fixture
def mixed_swipes():
    return _swipes([("1", True), ("2", False), ("3", True), ("4", False), ("5", True)])


@pytest.fixture
def all_liked_swipes():
    return _swipes([("1", True), ("2", True), ("3", True), ("4", True), ("5", True)])


@pytest.fixture
def two_swipes():
    return _swipes([("1", True), ("2", False)])


@pytest.fixture
def user_location():
    return USER_LOCATION


@pytest.fixture
def located_preferences():
    return UserPreferences(
        address="Times Square, New York, NY",
        latitude=USER_LOCATION[0],
        longitude=USER_LOCATION[1],
    )
