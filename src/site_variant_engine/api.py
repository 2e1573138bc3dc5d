from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Sequence

from fastapi import FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .errors import PersistenceFailure, ValidationError, VariantEngineError
from .logging_config import set_trace_id
from .models.override import OverrideStats
from .models.site import BusinessProfile, SectionType, SiteDraft, SiteSection
from .models.variant import ScoredVariant, SiteSelection
from .selector import percentage
from .service import VariantService

logger = logging.getLogger(__name__)

BATCH_ALTERNATIVES = 2


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Requests


class CreateSiteRequest(ApiModel):
    session_id: str = Field(min_length=1)
    business_profile: BusinessProfile = Field(default_factory=BusinessProfile)
    sections: list[SiteSection] = Field(default_factory=list)


class RecommendationRequest(ApiModel):
    section_type: str | None = None
    sections: list[str] | None = None


class SwitchVariantRequest(ApiModel):
    section_id: str
    section_type: str
    new_variant: int = Field(ge=1, le=5)
    is_override: bool = True


class CreateSectionRequest(ApiModel):
    type: SectionType
    order: int | None = Field(default=None, ge=0)
    variant: int | None = Field(default=None, ge=1, le=5)
    content: dict[str, Any]
    is_visible: bool = True
    validate_content: bool = False


class UpdateSectionRequest(ApiModel):
    order: int | None = Field(default=None, ge=0)
    variant: int | None = Field(default=None, ge=1, le=5)
    content: dict[str, Any] | None = None
    is_visible: bool | None = None
    validate_content: bool = False


# Responses


class CreateSiteResponse(ApiModel):
    success: bool = True
    site_id: str
    updated_at: datetime


class RecommendationSummary(ApiModel):
    selected_variant: int
    score: float
    reasoning: str


class AlternativeDetail(ApiModel):
    variant: int
    score: float
    description: str
    traits: Sequence[str]


class ScoredVariantSummary(ApiModel):
    variant: int
    score: int
    description: str
    is_recommended: bool


class SectionRecommendationResponse(ApiModel):
    success: bool = True
    section_type: SectionType
    recommendation: RecommendationSummary
    alternatives: list[AlternativeDetail]
    all_variants: list[ScoredVariantSummary]


class AlternativeSummary(ApiModel):
    variant: int
    description: str


class BatchSelection(ApiModel):
    section_type: SectionType
    selected_variant: int
    score: int
    reasoning: str
    alternatives: list[AlternativeSummary]


class BatchRecommendationResponse(ApiModel):
    success: bool = True
    selections: list[BatchSelection]
    overall_reasoning: str

    @staticmethod
    def from_selection(site_selection: SiteSelection) -> "BatchRecommendationResponse":
        return BatchRecommendationResponse(
            selections=[
                BatchSelection(
                    section_type=selection.section_type,
                    selected_variant=selection.selected_variant,
                    score=percentage(selection.score),
                    reasoning=selection.reasoning,
                    alternatives=[
                        AlternativeSummary(variant=alt.variant, description=alt.personality.description)
                        for alt in list(selection.alternatives)[:BATCH_ALTERNATIVES]
                    ],
                )
                for selection in site_selection.selections
            ],
            overall_reasoning=site_selection.overall_reasoning,
        )


class VariantOption(ApiModel):
    variant: int
    match_score: int
    description: str
    traits: Sequence[str]
    best_for: Sequence[str]
    is_recommended: bool
    is_current: bool


class VariantOptionsResponse(ApiModel):
    success: bool = True
    section_type: SectionType
    current_variant: int
    variants: list[VariantOption]


class VariantInfo(ApiModel):
    description: str
    traits: Sequence[str]
    match_score: int

    @staticmethod
    def from_scored(scored: ScoredVariant | None) -> "VariantInfo | None":
        if scored is None:
            return None
        return VariantInfo(
            description=scored.personality.description,
            traits=list(scored.personality.traits),
            match_score=percentage(scored.score),
        )


class SwitchVariantResponse(ApiModel):
    success: bool = True
    section_id: str
    section_type: SectionType
    previous_variant: int
    new_variant: int
    is_override: bool
    variant_info: VariantInfo | None
    updated_at: datetime


class ApplyRecommendationsResponse(BatchRecommendationResponse):
    sections: list[SiteSection]
    updated_at: datetime


class SectionListResponse(ApiModel):
    sections: list[SiteSection]
    total: int


class SectionResponse(ApiModel):
    section: SiteSection


class CreateSectionResponse(ApiModel):
    section: SiteSection
    total_sections: int


class DeleteSectionResponse(ApiModel):
    deleted: str
    remaining_sections: int


class ComponentResponse(ApiModel):
    section_id: str
    section_type: SectionType
    variant: int
    component_name: str
    component_path: str


def create_app(service: VariantService, *, title: str = "Site Variant Engine API", version: str = "0.1.0") -> FastAPI:
    app = FastAPI(title=title, version=version)

    @app.middleware("http")
    async def trace_context(request: Request, call_next):
        header = request.headers.get("X-Cloud-Trace-Context", "")
        set_trace_id(header.split("/")[0] or str(uuid.uuid4()))
        return await call_next(request)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request data", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(VariantEngineError)
    async def engine_error_handler(request: Request, exc: VariantEngineError) -> JSONResponse:
        if isinstance(exc, PersistenceFailure):
            logger.error("Persistence failure", extra={"path": request.url.path, "error": exc.message})
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "details": jsonable_encoder(exc.details)},
        )

    @app.post("/v1/sites", response_model=CreateSiteResponse, status_code=201)
    async def create_site(request: CreateSiteRequest) -> CreateSiteResponse:
        site = service.create_site(
            session_id=request.session_id,
            business_profile=request.business_profile,
            sections=request.sections,
        )
        return CreateSiteResponse(site_id=site.id, updated_at=site.updated_at)

    @app.get("/v1/sites/{site_id}", response_model=SiteDraft)
    async def get_site(site_id: str) -> SiteDraft:
        return service.get_site(site_id)

    @app.post("/v1/sites/{site_id}/variants")
    async def recommend_variants(
        site_id: str,
        request: RecommendationRequest | None = None,
    ) -> SectionRecommendationResponse | BatchRecommendationResponse:
        request = request or RecommendationRequest()

        if request.section_type:
            result = service.recommend_section(site_id, request.section_type)
            selection = result.selection
            return SectionRecommendationResponse(
                section_type=selection.section_type,
                recommendation=RecommendationSummary(
                    selected_variant=selection.selected_variant,
                    score=selection.score,
                    reasoning=selection.reasoning,
                ),
                alternatives=[
                    AlternativeDetail(
                        variant=alt.variant,
                        score=alt.score,
                        description=alt.personality.description,
                        traits=list(alt.personality.traits),
                    )
                    for alt in selection.alternatives
                ],
                all_variants=[
                    ScoredVariantSummary(
                        variant=item.variant,
                        score=percentage(item.score),
                        description=item.personality.description,
                        is_recommended=item.is_recommended,
                    )
                    for item in result.all_variants
                ],
            )

        site_selection = service.recommend_sections(site_id, request.sections or None)
        return BatchRecommendationResponse.from_selection(site_selection)

    @app.get("/v1/sites/{site_id}/variants", response_model=VariantOptionsResponse)
    async def list_variants(
        site_id: str,
        section_type: str | None = Query(default=None, alias="sectionType"),
    ) -> VariantOptionsResponse:
        if not section_type:
            raise ValidationError("sectionType query parameter is required")
        options = service.variant_options(site_id, section_type)
        return VariantOptionsResponse(
            section_type=options.section_type,
            current_variant=options.current_variant,
            variants=[
                VariantOption(
                    variant=item.variant,
                    match_score=percentage(item.score),
                    description=item.personality.description,
                    traits=list(item.personality.traits),
                    best_for=list(item.personality.best_for_industries),
                    is_recommended=item.is_recommended,
                    is_current=item.variant == options.current_variant,
                )
                for item in options.variants
            ],
        )

    @app.patch("/v1/sites/{site_id}/variants", response_model=SwitchVariantResponse)
    async def switch_variant(site_id: str, request: SwitchVariantRequest) -> SwitchVariantResponse:
        result = service.switch_variant(
            site_id,
            section_id=request.section_id,
            section_type=request.section_type,
            new_variant=request.new_variant,
            is_override=request.is_override,
        )
        return SwitchVariantResponse(
            section_id=result.section.id,
            section_type=result.section.type,
            previous_variant=result.previous_variant,
            new_variant=result.new_variant,
            is_override=result.is_override,
            variant_info=VariantInfo.from_scored(result.variant_info),
            updated_at=result.updated_at,
        )

    @app.post("/v1/sites/{site_id}/variants:apply", response_model=ApplyRecommendationsResponse)
    async def apply_variants(site_id: str) -> ApplyRecommendationsResponse:
        result = service.apply_recommendations(site_id)
        batch = BatchRecommendationResponse.from_selection(result.site_selection)
        return ApplyRecommendationsResponse(
            selections=batch.selections,
            overall_reasoning=batch.overall_reasoning,
            sections=result.sections,
            updated_at=result.updated_at,
        )

    @app.get("/v1/sites/{site_id}/sections", response_model=SectionListResponse)
    async def list_sections(site_id: str) -> SectionListResponse:
        sections = service.list_sections(site_id)
        return SectionListResponse(sections=sections, total=len(sections))

    @app.post("/v1/sites/{site_id}/sections", response_model=CreateSectionResponse, status_code=201)
    async def create_section(site_id: str, request: CreateSectionRequest) -> CreateSectionResponse:
        section, total = service.add_section(
            site_id,
            section_type=request.type,
            content=request.content,
            variant=request.variant,
            order=request.order,
            is_visible=request.is_visible,
            validate_content=request.validate_content,
        )
        return CreateSectionResponse(section=section, total_sections=total)

    @app.get("/v1/sites/{site_id}/sections/{section_id}", response_model=SectionResponse)
    async def get_section(site_id: str, section_id: str) -> SectionResponse:
        return SectionResponse(section=service.get_section(site_id, section_id))

    @app.patch("/v1/sites/{site_id}/sections/{section_id}", response_model=SectionResponse)
    async def update_section(site_id: str, section_id: str, request: UpdateSectionRequest) -> SectionResponse:
        section = service.update_section(
            site_id,
            section_id,
            order=request.order,
            variant=request.variant,
            content=request.content,
            is_visible=request.is_visible,
            validate_content=request.validate_content,
        )
        return SectionResponse(section=section)

    @app.delete("/v1/sites/{site_id}/sections/{section_id}", response_model=DeleteSectionResponse)
    async def delete_section(site_id: str, section_id: str) -> DeleteSectionResponse:
        section, remaining = service.delete_section(site_id, section_id)
        return DeleteSectionResponse(deleted=section.id, remaining_sections=remaining)

    @app.get("/v1/sites/{site_id}/sections/{section_id}/component", response_model=ComponentResponse)
    async def resolve_component(site_id: str, section_id: str) -> ComponentResponse:
        entry = service.resolve_component(site_id, section_id)
        return ComponentResponse(
            section_id=section_id,
            section_type=entry.section,
            variant=entry.variant,
            component_name=entry.component_name,
            component_path=entry.component_path,
        )

    @app.get("/v1/analytics/overrides", response_model=OverrideStats)
    async def override_stats(site_id: str | None = Query(default=None, alias="siteId")) -> OverrideStats:
        return service.override_stats(site_id)

    @app.get("/health")
    async def healthcheck() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return app


__all__ = ["create_app"]
