"""Utility functions for the Market Report Studio API"""
from .downloads import content_disposition
from .json_helpers import analysis_to_dict, customer_to_dict, file_to_dict

__all__ = ["analysis_to_dict", "content_disposition", "customer_to_dict", "file_to_dict"]
