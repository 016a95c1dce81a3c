"""Fixed Saskatoon providers used to seed an empty directory"""

SEED_PASSWORD = "provider123"  # noqa: S105 - shared demo password for seeded accounts

SASKATOON_PROVIDERS = [
    {
        "name": "Saskatoon Catering Co.",
        "email": "catering@saskatoon.com",
        "business_name": "Saskatoon Catering Co.",
        "address": "123 2nd Avenue N, Saskatoon, SK",
        "phone": "(306) 555-0101",
        "business_email": "info@saskatooncatering.com",
    },
    {
        "name": "Prairie Venue Rentals",
        "email": "venue@prairie.com",
        "business_name": "Prairie Venue Rentals",
        "address": "456 3rd Street E, Saskatoon, SK",
        "phone": "(306) 555-0102",
        "business_email": "bookings@prairievenue.com",
    },
    {
        "name": "Saskatoon DJ Services",
        "email": "dj@saskatoon.com",
        "business_name": "Saskatoon DJ Services",
        "address": "789 Broadway Avenue, Saskatoon, SK",
        "phone": "(306) 555-0103",
        "business_email": "music@saskatoondj.com",
    },
    {
        "name": "River City Photography",
        "email": "photo@rivercity.com",
        "business_name": "River City Photography",
        "address": "321 1st Avenue S, Saskatoon, SK",
        "phone": "(306) 555-0104",
        "business_email": "info@rivercityphoto.com",
    },
    {
        "name": "Saskatoon Floral Design",
        "email": "flowers@saskatoon.com",
        "business_name": "Saskatoon Floral Design",
        "address": "654 8th Street E, Saskatoon, SK",
        "phone": "(306) 555-0105",
        "business_email": "orders@saskatoonfloral.com",
    },
    {
        "name": "Prairie Party Rentals",
        "email": "rentals@prairie.com",
        "business_name": "Prairie Party Rentals",
        "address": "987 22nd Street W, Saskatoon, SK",
        "phone": "(306) 555-0106",
        "business_email": "rentals@prairieparty.com",
    },
    {
        "name": "Saskatoon Event Planning",
        "email": "planning@saskatoon.com",
        "business_name": "Saskatoon Event Planning",
        "address": "147 20th Street W, Saskatoon, SK",
        "phone": "(306) 555-0107",
        "business_email": "events@saskatoonevents.com",
    },
    {
        "name": "Bridge City Bakery",
        "email": "bakery@bridgecity.com",
        "business_name": "Bridge City Bakery",
        "address": "258 3rd Avenue S, Saskatoon, SK",
        "phone": "(306) 555-0108",
        "business_email": "orders@bridgecitybakery.com",
    },
    {
        "name": "Saskatoon Security Services",
        "email": "security@saskatoon.com",
        "business_name": "Saskatoon Security Services",
        "address": "369 Circle Drive, Saskatoon, SK",
        "phone": "(306) 555-0109",
        "business_email": "info@saskatoonsecurity.com",
    },
    {
        "name": "Prairie Sound & Lighting",
        "email": "sound@prairie.com",
        "business_name": "Prairie Sound & Lighting",
        "address": "741 Idylwyld Drive N, Saskatoon, SK",
        "phone": "(306) 555-0110",
        "business_email": "tech@prairiesound.com",
    },
]
