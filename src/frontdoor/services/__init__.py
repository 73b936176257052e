from src.frontdoor.services.project_service import ProjectService, is_valid_subdomain, worker_url

__all__ = [
    "ProjectService",
    "is_valid_subdomain",
    "worker_url",
]
