from fastapi import APIRouter, Depends, HTTPException

from geoinfo.models.places_model import Coordinate, PhotoUpdateRequest, PlaceRecord, PlacesResponse
from geoinfo.routes.dependencies import Stores, get_stores

router = APIRouter()

@router.get("/places", response_model=PlacesResponse)
async def list_places_endpoint(stores: Stores = Depends(get_stores)):
    """Saved locations for the map view, each with its coordinate attached."""
    places = await stores.places.list_saved_locations(stores.coordinates)
    return PlacesResponse(places=places, total=len(places))

@router.get("/coordinates/{coordinate_id}/place", response_model=PlaceRecord)
async def get_place_endpoint(coordinate_id: int, stores: Stores = Depends(get_stores)):
    return await stores.places.get_by_coordinate_id(coordinate_id)

@router.delete("/places/{place_id}")
async def delete_place_endpoint(place_id: int, stores: Stores = Depends(get_stores)):
    deleted = await stores.places.delete_by_id(place_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Place record {place_id} not found")
    return {"deleted": True, "id": place_id}

@router.put("/places/{place_id}/photo")
async def update_photo_endpoint(place_id: int, request: PhotoUpdateRequest, stores: Stores = Depends(get_stores)):
    updated = await stores.places.update_photo_reference(request.photo_uri, place_id)
    if not updated:
        raise HTTPException(status_code=404, detail=f"Place record {place_id} not updated")
    return {"updated": True, "id": place_id}

@router.get("/coordinates/{coordinate_id}", response_model=Coordinate)
async def get_coordinate_endpoint(coordinate_id: int, stores: Stores = Depends(get_stores)):
    return await stores.coordinates.get_coordinate_by_id(coordinate_id)
