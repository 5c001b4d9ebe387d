import uvicorn

from redeemhub.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "redeemhub.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=settings.APP_ENV != "production",
    )
