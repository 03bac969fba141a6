"""Per-day availability buckets with localized labels and a static fallback."""
