from .auth import *
from .project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectListResponse,
)
from .company import (
    Company,
    CompanyCreate,
    CompanyUpdate,
    Contact,
    ContactCreate,
    ContactUpdate,
)
from .estimate import Estimate, EstimateUpsert
from .product_description import (
    ProductDescription,
    ProductDescriptionCreate,
    ProductDescriptionUpdate,
)
from .activity import Activity, ActivityCreate
from .quote import (
    QuoteItem,
    ProjectSnapshot,
    QuoteOptions,
    QuotePreviewRequest,
    QuoteGenerateRequest,
    QuotePreviewResponse,
    QuoteGenerateResponse,
    ProjectFile,
    LineItem,
    LineItemCreate,
)
