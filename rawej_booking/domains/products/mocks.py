"""Static consultation products served when mock fallback is enabled."""

MOCK_PRODUCTS = [
    {
        "id": 1,
        "slug": "chat-consultation",
        "title": "Chat",
        "title_en": "Chat Consultation",
        "summary": "Online consultation via text chat",
        "description": "Talk to your doctor through text chat and ask your questions.",
        "display_rank": 1,
        "prices": [
            {"id": 1, "product_id": 1, "title": "30-minute Consultation", "price": 500, "currency": "USD"},
            {"id": 2, "product_id": 1, "title": "60-minute Consultation", "price": 800, "currency": "USD"},
        ],
    },
    {
        "id": 2,
        "slug": "video-consultation",
        "title": "Video Consultation",
        "title_en": "Video Consultation",
        "summary": "Online consultation via video call",
        "description": "Talk to your doctor through a video call and receive advice.",
        "display_rank": 2,
        "prices": [
            {"id": 3, "product_id": 2, "title": "30-minute Consultation", "price": 75, "currency": "USD"},
            {
                "id": 4,
                "product_id": 2,
                "title": "60-minute Consultation",
                "price": 1200,
                "discount_amount": 10000,
                "discount_percent": "8",
                "currency": "USD",
            },
        ],
    },
    {
        "id": 3,
        "slug": "scheduled-phone-consultation",
        "title": "Scheduled Phone Consultation",
        "title_en": "Scheduled Phone Consultation",
        "summary": "Scheduled phone consultation",
        "description": "Scheduled phone consultation with a specialist doctor.",
        "display_rank": 3,
        "prices": [
            {"id": 5, "product_id": 3, "title": "30-minute Consultation", "price": 600, "currency": "USD"},
        ],
    },
]
