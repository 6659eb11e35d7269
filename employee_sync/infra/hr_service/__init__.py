# HR service read API integration
from employee_sync.infra.hr_service.adapter import HrServiceClient
from employee_sync.infra.hr_service.aggregator import UpstreamAggregator

__all__ = ["HrServiceClient", "UpstreamAggregator"]
