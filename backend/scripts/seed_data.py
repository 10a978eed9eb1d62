"""
Seed script to populate the database with a sample theatre log.
Run with: python -m scripts.seed_data
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date, timedelta

from stagelog.database import SessionLocal, engine, init_db
from stagelog.main import configure_logging, create_statistics_engine
from stagelog.stores import SqlAlchemyPerformanceStore


SHOWS_DATA = [
    {"title": "Matilda The Musical", "composer": "Tim Minchin", "lyricist": "Tim Minchin", "genre": "Musical"},
    {"title": "Operation Mincemeat", "composer": "SpitLip", "lyricist": "SpitLip", "genre": "Musical"},
    {"title": "Joseph and the Technicolor Dreamcoat", "composer": "Andrew Lloyd Webber",
     "lyricist": "Tim Rice", "genre": "Musical"},
    {"title": "Hamilton", "composer": "Lin-Manuel Miranda", "lyricist": "Lin-Manuel Miranda", "genre": "Musical"},
    {"title": "The Mousetrap", "genre": "Play"},
]

PERFORMANCES_DATA = [
    {
        "show_title": "Matilda The Musical",
        "date_seen": "2025-06-14",
        "theatre_name": "Cambridge Theatre",
        "city": "London",
        "production_type": "West End",
        "notes_on_access": "Mic Pack, did work",
        "ticket_price": 79.5,
        "booking_fee": 3.5,
        "travel_cost": 24.0,
        "rating": {
            "music_songs": 4.25, "story_plot": 5, "performance_cast": 4.5, "stage_visuals": 5,
            "rewatch_value": 3, "theatre_experience": 4, "programme": 5, "atmosphere": 4,
        },
    },
    {
        "show_title": "Operation Mincemeat",
        "date_seen": "2025-08-12",
        "theatre_name": "Fortune Theatre",
        "city": "London",
        "production_type": "West End",
        "ticket_price": 65.0,
        "booking_fee": 2.75,
        "rating": {
            "music_songs": 5, "story_plot": 5, "performance_cast": 5, "stage_visuals": 3,
            "rewatch_value": 5, "theatre_experience": 3, "programme": 3, "atmosphere": 5,
        },
    },
    {
        "show_title": "Joseph and the Technicolor Dreamcoat",
        "date_seen": "2025-07-18",
        "theatre_name": "Liverpool Empire",
        "city": "Liverpool",
        "production_type": "UK Tour",
        "notes_on_access": "Uses in ear, did work",
        "ticket_price": 42.0,
        "travel_cost": 18.6,
        "rating": {
            "music_songs": 4.75, "story_plot": 3.5, "performance_cast": 5, "stage_visuals": 3.5,
            "rewatch_value": 5, "theatre_experience": 5, "programme": 4, "atmosphere": 5,
        },
    },
    {
        "show_title": "Joseph and the Technicolor Dreamcoat",
        "date_seen": "2025-07-19",
        "theatre_name": "Liverpool Empire",
        "city": "Liverpool",
        "production_type": "UK Tour",
        "ticket_price": 38.0,
        "rating": {
            "music_songs": 4.75, "story_plot": 3.5, "performance_cast": 5, "stage_visuals": 3.5,
            "rewatch_value": 5, "theatre_experience": 5, "programme": 4, "atmosphere": 5,
        },
    },
    {
        "show_title": "Hamilton",
        "date_seen": "2025-09-02",
        "theatre_name": "Disney+",
        "production_type": "Pro Shot",
        "ticket_price": 7.99,
        "rating": {"music_songs": 5, "story_plot": 4.5, "performance_cast": 5, "stage_visuals": 4},
    },
    {
        "show_title": "The Mousetrap",
        "date_seen": "2025-10-04",
        "theatre_name": "St Martin's Theatre",
        "city": "London",
        "production_type": "West End",
        "is_musical": False,
        "ticket_price": 55.0,
        "rating": {"performance_cast": 4, "stage_visuals": 3.5, "story_plot": 4.5, "atmosphere": 4},
    },
]


def create_tables():
    """Create all database tables."""
    init_db(engine)
    print("Database tables created.")


def seed_shows(store):
    """Seed show catalogue."""
    shows = {}
    for data in SHOWS_DATA:
        show = store.find_show_by_title(data["title"]) or store.add_show(data)
        shows[show.title] = show
    print(f"Catalogue has {len(shows)} shows.")
    return shows


def seed_performances(store, shows):
    """Seed logged performances plus one booked for next month."""
    count = 0
    for data in PERFORMANCES_DATA:
        record = {key: value for key, value in data.items() if key != "show_title"}
        record["show_id"] = shows[data["show_title"]].id
        store.add_performance(record)
        count += 1

    store.add_performance({
        "show_id": shows["Hamilton"].id,
        "date_seen": (date.today() + timedelta(days=30)).isoformat(),
        "theatre_name": "Victoria Palace Theatre",
        "city": "London",
        "production_type": "West End",
        "ticket_price": 120.0,
        "booking_fee": 4.5,
    })
    count += 1
    print(f"Created {count} performances.")


def main():
    """Run all seed functions."""
    configure_logging()
    print("Starting database seed...")
    print("=" * 50)

    create_tables()
    store = SqlAlchemyPerformanceStore(SessionLocal)

    existing = len(store.get_performances())
    if existing > 0:
        print(f"Database already has {existing} performances. Skipping seed.")
        print("To reseed, delete the database file and run again.")
        return

    shows = seed_shows(store)
    seed_performances(store, shows)

    statistics = create_statistics_engine(store).get_statistics()
    print("=" * 50)
    print("Seed complete!")
    print(f"  Total spent: {statistics.overview.total_spent}")
    print(f"  Average rating: {statistics.overview.avg_rating}")
    for achievement in statistics.achievements:
        print(f"  {achievement.icon} {achievement.name}")


if __name__ == "__main__":
    main()
