# coding: utf-8

"""
    Data Room API (v1)

    Data rooms, folder-scoped grants, access requests and the activity trail.
"""


from fastapi import FastAPI

from dataroom_api.apis.access_requests_api import router as AccessRequestsApiRouter
from dataroom_api.apis.activity_api import router as ActivityApiRouter
from dataroom_api.apis.data_rooms_api import router as DataRoomsApiRouter

app = FastAPI(
    title="Data Room API",
    description="Data rooms, folder-scoped grants, access requests and the activity trail.",
    version="1.0.0",
)

app.include_router(AccessRequestsApiRouter)
app.include_router(ActivityApiRouter)
app.include_router(DataRoomsApiRouter)
