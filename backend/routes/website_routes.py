import logging
import re
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from backend.auth.dependencies import get_current_identity
from backend.auth.token_verifier import Identity
from backend.database import get_db
from backend.models.user import User  # noqa: F401
from backend.models.website import RiskLevel, Website

logger = logging.getLogger(__name__)

WEBSITE_NOT_FOUND_MESSAGE = 'Website not found'
WEBSITE_REMOVED_MESSAGE = 'Website removed'
METHOD_NOT_ALLOWED_MESSAGE = 'Method not allowed'
SERVER_ERROR_MESSAGE = 'Server error'

WEBSITE_ID_PATTERN = re.compile(r'[0-9]+')
MAX_WEBSITE_ID = 2 ** 63 - 1


class WebsiteRoute(APIRoute):
    """Reports a rejected request body like any other failed write: a generic 500."""

    def get_route_handler(self):
        route_handler = super().get_route_handler()

        async def handle_request(request: Request):
            try:
                return await route_handler(request)
            except RequestValidationError as exc:
                logger.warning(
                    'Rejected website payload on %s %s: %s',
                    request.method,
                    request.url.path,
                    exc.errors(),
                )
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=SERVER_ERROR_MESSAGE,
                ) from exc

        return handle_request


router = APIRouter(tags=['websites'], route_class=WebsiteRoute)


class CreateWebsiteRequest(BaseModel):
    name: str
    url: str
    risk_level: RiskLevel | None = None
    is_protected: bool | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator('name', 'url')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError('Field is required.')
        return value


class UpdateWebsiteRequest(BaseModel):
    name: str | None = None
    url: str | None = None
    risk_level: RiskLevel | None = None
    is_protected: bool | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class WebsiteOwnerResponse(BaseModel):
    id: int
    username: str


class WebsiteResponse(BaseModel):
    id: int
    name: str
    url: str
    risk_level: RiskLevel
    is_protected: bool
    date_added: datetime
    created_by: WebsiteOwnerResponse | int | None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class MessageResponse(BaseModel):
    msg: str


def serialize_website(website: Website, resolve_owner: bool = False) -> WebsiteResponse:
    created_by = website.created_by
    if resolve_owner:
        creator = website.creator
        created_by = WebsiteOwnerResponse(id=creator.id, username=creator.username) if creator else None

    return WebsiteResponse(
        id=website.id,
        name=website.name,
        url=website.url,
        risk_level=website.risk_level,
        is_protected=website.is_protected,
        date_added=website.date_added,
        created_by=created_by,
    )


def parse_website_id(website_id: str) -> int:
    # Anything outside a signed 64-bit key cannot name a stored row.
    if (
        not WEBSITE_ID_PATTERN.fullmatch(website_id)
        or len(website_id) > len(str(MAX_WEBSITE_ID))
        or int(website_id) > MAX_WEBSITE_ID
    ):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=WEBSITE_NOT_FOUND_MESSAGE,
        )
    return int(website_id)


def get_website_or_404(website_id: str, db: Session) -> Website:
    website = db.query(Website).filter(Website.id == parse_website_id(website_id)).first()
    if website is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=WEBSITE_NOT_FOUND_MESSAGE,
        )
    return website


def server_error(db: Session, action: str) -> HTTPException:
    db.rollback()
    logger.exception('Failed to %s', action)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=SERVER_ERROR_MESSAGE,
    )


@router.get('', response_model=list[WebsiteResponse])
def list_websites(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    del identity

    try:
        websites = db.query(Website).options(joinedload(Website.creator)).all()
        return [serialize_website(website, resolve_owner=True) for website in websites]
    except SQLAlchemyError as exc:
        raise server_error(db, 'list websites') from exc


@router.post('', response_model=WebsiteResponse, status_code=status.HTTP_201_CREATED)
def create_website(
    data: CreateWebsiteRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    fields = {'name': data.name, 'url': data.url, 'created_by': identity.id}
    if data.risk_level is not None:
        fields['risk_level'] = data.risk_level
    if data.is_protected is not None:
        fields['is_protected'] = data.is_protected

    try:
        website = Website(**fields)
        db.add(website)
        db.commit()
        db.refresh(website)

        return serialize_website(website)
    except SQLAlchemyError as exc:
        raise server_error(db, 'create website') from exc


@router.api_route(
    '',
    methods=['PUT', 'PATCH', 'DELETE'],
    dependencies=[Depends(get_current_identity)],
    include_in_schema=False,
)
def websites_method_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail=METHOD_NOT_ALLOWED_MESSAGE,
    )


@router.get('/{website_id}', response_model=WebsiteResponse)
def get_website(
    website_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    del identity

    try:
        website = get_website_or_404(website_id, db)
        return serialize_website(website, resolve_owner=True)
    except SQLAlchemyError as exc:
        raise server_error(db, 'load website') from exc


@router.put('/{website_id}', response_model=WebsiteResponse)
def update_website(
    website_id: str,
    data: UpdateWebsiteRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    del identity

    try:
        website = get_website_or_404(website_id, db)

        # Empty strings leave the stored value alone; an explicit false still applies.
        if data.name:
            website.name = data.name
        if data.url:
            website.url = data.url
        if data.risk_level:
            website.risk_level = data.risk_level
        if data.is_protected is not None:
            website.is_protected = data.is_protected

        db.commit()
        db.refresh(website)

        return serialize_website(website)
    except SQLAlchemyError as exc:
        raise server_error(db, 'update website') from exc


@router.delete('/{website_id}', response_model=MessageResponse)
def delete_website(
    website_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    del identity

    try:
        website = get_website_or_404(website_id, db)
        db.delete(website)
        db.commit()

        return MessageResponse(msg=WEBSITE_REMOVED_MESSAGE)
    except SQLAlchemyError as exc:
        raise server_error(db, 'delete website') from exc


@router.api_route(
    '/{website_id}',
    methods=['POST', 'PATCH'],
    dependencies=[Depends(get_current_identity)],
    include_in_schema=False,
)
def website_method_not_allowed(website_id: str):
    del website_id
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail=METHOD_NOT_ALLOWED_MESSAGE,
    )
