from .user import User
from .company import Company, Contact
from .project import Project
from .estimate import ProjectEstimate
from .product_description import ProductDescription
from .line_item import ProjectLineItem, AUTO_PREFIX, MANUAL_PREFIX
from .project_file import ProjectFile
from .activity import Activity
