"""
MongoDB Setup Script
Tests connection and initializes collections and indexes for the alert engine.
"""
import asyncio
from src.repositories import db_manager
from src.config import settings

COLLECTIONS = ("alerts", "calls", "rule_configurations")


async def setup_mongodb():
    """Initialize the database with indexes, including the alert dedup index."""
    print("🔄 Connecting to MongoDB...")
    print(f"   Database: {settings.mongodb_database}")
    print()

    try:
        await db_manager.connect()
        db = db_manager.database
        await db_manager.client.admin.command("ping")
        print("✅ Connection successful!")
        print()

        existing_collections = await db.list_collection_names()
        print(f"📦 Existing collections: {existing_collections or 'None'}")
        print()

        print("🔨 Creating indexes...")
        await db_manager.create_indexes()
        print("✅ Indexes created successfully!")
        print()

        print("📊 Verifying indexes:")
        total = 0
        for name in COLLECTIONS:
            indexes = await db[name].index_information()
            total += len(indexes)
            print(f"   {name}: {len(indexes)} indexes")
            for idx_name in indexes:
                print(f"      - {idx_name}")

        print()
        print(f"🎉 Setup complete: {total} indexes across {len(COLLECTIONS)} collections")

    except Exception as e:
        print(f"❌ Error: {e}")
        print()
        print("💡 Troubleshooting:")
        print("   1. Check MONGODB_URI and that the server is reachable")
        print("   2. Verify the credentials have createIndex permission")
        print("   3. Existing duplicate (call_id, type) alerts block the unique index; remove them first")
        raise

    finally:
        await db_manager.disconnect()
        print("👋 Disconnected from MongoDB")


if __name__ == "__main__":
    asyncio.run(setup_mongodb())
