# product_service/api/deps.py
from fastapi import Depends
from product_service.db.mongo import get_db
from product_service.db.redis import get_redis
from product_service.domain.repositories.category_repo import CategoryRepo
from product_service.domain.repositories.interaction_repo import InteractionRepo
from product_service.domain.repositories.product_repo import ProductRepo
from product_service.domain.services.hybrid_svc import HybridRecommendationService

# Dependency for injecting the MongoDB database into repositories
async def mongo_db(db = Depends(get_db)):
    return db

# Dependency for injecting the Redis client (may be None)
def redis_dep():
    return get_redis()

# Repositories: tests override these three with in-memory fakes
def product_repo(db = Depends(mongo_db)) -> ProductRepo:
    return ProductRepo(db)

def category_repo(db = Depends(mongo_db)) -> CategoryRepo:
    return CategoryRepo(db)

def interaction_repo(db = Depends(mongo_db)) -> InteractionRepo:
    return InteractionRepo(db)

def recommendation_service(
    products = Depends(product_repo),
    interactions = Depends(interaction_repo),
    redis = Depends(redis_dep),
) -> HybridRecommendationService:
    return HybridRecommendationService(products, interactions, redis)
