"""
Seed demo data: admin/test users, initiatives, products and site settings.

Every record is upserted on its unique key, so running it twice is harmless.

    python seed.py
"""
import logging

import config
import database
from auth import hash_password
from database import now

logger = logging.getLogger(__name__)

GALLERY_EXTRA = "https://images.unsplash.com/photo-1555949963-aa79dcee981c?w=800&h=600&fit=crop"


def _seed_payload():
    users = [
        {
            "email": "admin@frtlcreativelabs.com",
            "password": config.SEED_ADMIN_PASSWORD,
            "display_name": "Admin User",
            "role": "ADMIN",
        },
        {
            "email": "user@example.com",
            "password": config.SEED_USER_PASSWORD,
            "display_name": "Test User",
            "role": "USER",
        },
    ]

    initiatives = [
        {
            "title": "Quantum Computing Interface",
            "slug": "quantum-computing-interface",
            "summary": "Revolutionary quantum computing platform for developers",
            "long_description": "Our quantum computing interface provides developers with the tools and resources needed to build quantum applications, including circuit simulators, algorithm libraries and extensive documentation.",
            "hero_image": "https://images.unsplash.com/photo-1635070041078-e43c8c05a5e1?w=800&h=600&fit=crop",
            "gallery": [
                "https://images.unsplash.com/photo-1635070041078-e43c8c05a5e1?w=800&h=600&fit=crop",
                GALLERY_EXTRA,
            ],
            "featured": True,
            "order": 1,
            "external_docs_link": "https://docs.quantum.example.com",
            "status": "active",
        },
        {
            "title": "Neural Network Optimization",
            "slug": "neural-network-optimization",
            "summary": "Advanced AI optimization techniques for machine learning",
            "long_description": "Our neural network optimization platform improves model performance, reduces training time and optimizes resource usage for enterprise AI applications.",
            "hero_image": "https://images.unsplash.com/photo-1677442136019-21780ccdd014?w=800&h=600&fit=crop",
            "gallery": [
                "https://images.unsplash.com/photo-1677442136019-21780ccdd014?w=800&h=600&fit=crop",
                GALLERY_EXTRA,
            ],
            "featured": True,
            "order": 2,
            "external_docs_link": None,
            "status": "active",
        },
        {
            "title": "Blockchain Integration Suite",
            "slug": "blockchain-integration-suite",
            "summary": "Comprehensive blockchain development toolkit",
            "long_description": "Everything needed to build decentralized applications: smart contract templates, testing frameworks and deployment tools.",
            "hero_image": "https://images.unsplash.com/photo-1639762681485-074b7f938ba0?w=800&h=600&fit=crop",
            "gallery": [
                "https://images.unsplash.com/photo-1639762681485-074b7f938ba0?w=800&h=600&fit=crop",
                GALLERY_EXTRA,
            ],
            "featured": True,
            "order": 3,
            "external_docs_link": None,
            "status": "active",
        },
    ]

    products = [
        {
            "title": "Quantum Computing Starter Kit",
            "sku": "QCS-001",
            "price": 29999,
            "currency": "USD",
            "description": "Complete quantum computing starter kit with development tools, documentation, and sample projects.",
            "images": [
                "https://images.unsplash.com/photo-1635070041078-e43c8c05a5e1?w=800&h=600&fit=crop",
                GALLERY_EXTRA,
            ],
            "inventory_count": 50,
            "initiative_id": "quantum-computing-interface",
            "metadata": {
                "category": "quantum-computing",
                "difficulty": "beginner",
                "includes": ["Development tools", "Documentation", "Sample projects", "Community access"],
            },
            "featured": True,
            "is_active": True,
        },
        {
            "title": "Neural Network Pro License",
            "sku": "NNP-002",
            "price": 49999,
            "currency": "USD",
            "description": "Professional license for the Neural Network Optimization platform with priority support and commercial usage rights.",
            "images": [
                "https://images.unsplash.com/photo-1677442136019-21780ccdd014?w=800&h=600&fit=crop",
                GALLERY_EXTRA,
            ],
            "inventory_count": 25,
            "initiative_id": "neural-network-optimization",
            "metadata": {
                "category": "ai-ml",
                "difficulty": "advanced",
                "includes": ["Pro features", "Priority support", "Commercial license", "API access"],
            },
            "featured": True,
            "is_active": True,
        },
        {
            "title": "Blockchain Developer Toolkit",
            "sku": "BDT-003",
            "price": 19999,
            "currency": "USD",
            "description": "Comprehensive toolkit for blockchain development with smart contract templates, testing frameworks, and deployment tools.",
            "images": [
                "https://images.unsplash.com/photo-1639762681485-074b7f938ba0?w=800&h=600&fit=crop",
                GALLERY_EXTRA,
            ],
            "inventory_count": 100,
            "initiative_id": "blockchain-integration-suite",
            "metadata": {
                "category": "blockchain",
                "difficulty": "intermediate",
                "includes": ["Smart contract templates", "Testing frameworks", "Deployment tools"],
            },
            "featured": True,
            "is_active": True,
        },
    ]

    settings = {
        "homepage": {
            "hero": {
                "title": "Welcome to Frtl Creative Labs",
                "subtitle": "Innovation meets creativity in the future of technology",
                "cta_text": "Explore Our Tech",
            },
            "who_is_fcl": {
                "title": "Who is Frtl Creative Labs?",
                "description": "We are innovators, creators, and visionaries building the future of technology.",
            },
        },
        "company": {
            "name": "Frtl Creative Labs",
            "tagline": "Innovation meets creativity",
            "mission": "Building the future of technology through innovative solutions",
            "founded": "2024",
            "location": "Tech City, USA",
        },
        "contact": {
            "email": "contact@frtlcreativelabs.com",
            "phone": "+1 (555) 123-4567",
            "address": "123 Innovation Drive, Tech City, TC 12345",
        },
    }
    return users, initiatives, products, settings


def _upsert(db, collection: str, key: str, doc: dict, overwrite: bool = True) -> None:
    update = {"$setOnInsert": {"created_at": now()}}
    fields = {k: v for k, v in doc.items() if k != key}
    fields["updated_at"] = now()
    if overwrite:
        update["$set"] = fields
    else:
        update["$setOnInsert"].update(fields)
    db[collection].update_one({key: doc[key]}, update, upsert=True)


def seed(db) -> dict:
    users, initiatives, products, settings = _seed_payload()

    for u in users:
        account = {
            "email": u["email"],
            "password_hash": hash_password(u["password"]),
            "display_name": u["display_name"],
            "role": u["role"],
            "is_active": True,
        }
        # existing accounts keep their password
        _upsert(db, "user", "email", account, overwrite=False)
    for i in initiatives:
        _upsert(db, "initiative", "slug", i)
    for p in products:
        _upsert(db, "product", "sku", p)
    for key, value in settings.items():
        _upsert(db, "sitesetting", "key", {"key": key, "value": value})

    counts = {
        "users": len(users),
        "initiatives": len(initiatives),
        "products": len(products),
        "settings": len(settings),
    }
    logger.info(f"Database seeded: {counts}")
    return counts


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL)
    if database.db is None:
        raise SystemExit("DATABASE_URL is not set")
    database.ensure_indexes(database.db)
    seed(database.db)
