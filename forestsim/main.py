"""Forest Impact Simulator — FastAPI application."""

import logging

from fastapi import FastAPI

from forestsim.routers import health, simulation, species

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Forest Impact Simulator",
    description="Estimate the environmental impact of planting or clearing a forest",
    version="0.1.0",
)

# Register routers
app.include_router(health.router)
app.include_router(species.router)
app.include_router(simulation.router)
