# reset_db.py
from mentormate.models.database import Base, build_engine, build_session_factory, create_all_tables
from mentormate.services.mentor_seed import seed_builtin_mentors
from mentormate.utils.encryption import configure_encryption
from mentormate.utils.settings import Settings

if __name__ == "__main__":
    settings = Settings.from_env()
    configure_encryption(settings.fernet_secret)
    engine = build_engine(settings.database_url)

    print("⚠️ Dropping all existing tables...")
    Base.metadata.drop_all(bind=engine)

    print("✅ Recreating tables from models...")
    create_all_tables(engine)

    db = build_session_factory(engine)()
    try:
        seed_builtin_mentors(db)
    finally:
        db.close()

    print("✅ Database reset complete.")
