"""Static doctor directory served when mock fallback is enabled."""

MOCK_DOCTORS = [
    {
        "id": 1,
        "name": "Dr. Alice Smith",
        "specialty": "Psychiatrist",
        "image": "https://randomuser.me/api/portraits/women/44.jpg",
        "rating": 4.8,
        "bio": "Expert in cognitive behavioral therapy and anxiety disorders.",
        "availability": ["2025-11-04T09:00", "2025-11-04T10:00", "2025-11-05T09:30"],
        "callTypes": ["phone", "video"],
    },
    {
        "id": 2,
        "name": "Dr. Bob Johnson",
        "specialty": "Clinical Psychologist",
        "image": "https://randomuser.me/api/portraits/men/32.jpg",
        "rating": 4.6,
        "bio": "Specializes in depression, trauma, and family counseling.",
        "availability": ["2025-11-04T11:00", "2025-11-05T13:00"],
        "callTypes": ["video", "voice"],
    },
    {
        "id": 3,
        "name": "Dr. Carol Lee",
        "specialty": "Child Psychologist",
        "image": "https://randomuser.me/api/portraits/women/68.jpg",
        "rating": 4.9,
        "bio": "Focuses on child development and behavioral issues.",
        "availability": ["2025-11-06T09:00", "2025-11-07T10:30"],
        "callTypes": ["phone", "voice"],
    },
    {
        "id": 4,
        "name": "Dr. Carol Lee",
        "specialty": "Marriage Psychologist",
        "image": "https://randomuser.me/api/portraits/women/68.jpg",
        "rating": 4.9,
        "bio": "Focuses on marriage counseling and relationship issues.",
        "availability": ["2025-11-08T14:00", "2025-11-09T15:00"],
        "callTypes": ["video"],
    },
]
