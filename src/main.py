"""
Sunrise-Sunset Sensors - Main Application Entry Point
"""

import asyncio
import logging
import os
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from devices.sensor_manager import SensorManager
from utils.config_utils import ConfigManager
from utils.storage import SensorStorage
from api import root, positions, sensors

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO")),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.FileHandler("debug.log"), logging.StreamHandler()],
)
logger = logging.getLogger(__name__)

# Global manager instance
manager = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    global manager

    # Startup
    logger.info("Starting Sunrise-Sunset Sensors...")
    if not ConfigManager.validate_environment():
        raise ValueError("Environment variables are not valid")

    config = await ConfigManager.load_service_config()
    storage = SensorStorage(ConfigManager.get_storage_path())
    manager = SensorManager.from_config(config, storage)
    await manager.start()

    # Inject manager into API modules
    positions.set_manager(manager)
    sensors.set_manager(manager)

    logger.info(
        f"Sunrise-Sunset Sensors initialized: {ConfigManager.get_config_summary(config)}"
    )

    yield

    # Shutdown
    logger.info("Shutting down Sunrise-Sunset Sensors...")
    if manager:
        await manager.shutdown()
    logger.info("Sunrise-Sunset Sensors shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Sunrise-Sunset Sensors API",
    description="""
    Binary sensors that are on during sunrise or sunset.

    ## Features
    * Sensors linked to position sensors for geolocation
    * Sunrise and sunset modes
    * Self-rescheduling timers that follow position changes

    ## Getting Started
    1. Report a position with `PUT /positions/{id}`
    2. Create a sensor with `POST /sensors`
    3. Link it with `PUT /sensors/{id}/settings/linkedPositionSensor`
    4. Pick a mode with `PUT /sensors/{id}/settings/mode`
    """,
    version="1.0.0",
    license_info={"name": "MIT License", "url": "https://opensource.org/licenses/MIT"},
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(root.router)
app.include_router(positions.router)
app.include_router(sensors.router)


async def main():
    """Main application function"""
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", 8000))

    logger.info(f"Starting Sunrise-Sunset Sensors API on {host}:{port}")

    config = uvicorn.Config(app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
