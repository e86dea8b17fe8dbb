from fastapi import APIRouter, Depends

from geoinfo.core.providers import StaticLocationProvider
from geoinfo.models.base_model import LoadRequest, LoadResponse, PipelineState
from geoinfo.models.places_model import Coordinate
from geoinfo.routes.dependencies import get_pipeline
from geoinfo.services.Pipeline_service import LoadPipeline

router = APIRouter()

@router.post("/load", response_model=LoadResponse)
async def load_endpoint(request: LoadRequest, pipeline: LoadPipeline = Depends(get_pipeline)):
    """
    Runs the load pipeline with the device coordinate, if the client sent one.
    Failures come back in `state` rather than as an HTTP error, so the client
    can show the failing stage and offer a retry.
    """
    location = None
    if request.latitude is not None and request.longitude is not None:
        location = StaticLocationProvider(Coordinate(latitude=request.latitude, longitude=request.longitude))

    state = await pipeline.run(location=location)
    return LoadResponse(state=state, session=pipeline.session)

@router.get("/load/state", response_model=PipelineState)
async def load_state_endpoint(pipeline: LoadPipeline = Depends(get_pipeline)):
    return pipeline.state
