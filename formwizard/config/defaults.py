"""
Default configuration values and flow templates.

Provides the two built-in onboarding flows (buyer and seller intake)
and a settings template for `formwizard init`.
"""

import copy
from typing import Any, Dict, List


# ============================================================
# Option Catalogues
# ============================================================

BUYER_CATEGORIES = [
    "Electronics",
    "Fashion",
    "Automotive",
    "Food & Beverage",
    "Home & Garden",
    "Health & Beauty",
]

COUNTRIES = [
    "United States",
    "India",
    "United Kingdom",
    "Germany",
    "France",
    "Japan",
]

PRODUCT_TYPES = [
    "New",
    "Refurbished",
    "Used",
    "Custom",
]

SELLER_CATEGORIES = [
    "Agriculture",
    "Electronics",
    "Clothing",
    "Furniture",
    "Food & Beverages",
    "Other",
]

BUSINESS_TYPES = [
    "Sole Proprietorship",
    "Partnership",
    "LLC",
    "Corporation",
    "Other",
]

OPERATIONAL_REGIONS = [
    "North America",
    "South America",
    "Europe",
    "Asia",
    "Africa",
    "Australia",
    "Middle East",
]


# ============================================================
# Built-in Flows
# ============================================================

BUYER_FLOW: Dict[str, Any] = {
    "name": "buyer",
    "title": "Buyer Onboarding",
    "storage_key": "buyerOnboardingForm",
    "submit_latency": 1.5,
    "steps": [
        {
            "label": "Basic Info",
            "fields": [
                {"name": "name", "label": "Full Name", "rule": "required-string",
                 "required_message": "Name is required."},
                {"name": "company", "label": "Company Name", "rule": "required-string",
                 "required_message": "Company is required."},
            ],
        },
        {
            "label": "Contact Details",
            "fields": [
                {"name": "email", "label": "Email", "rule": "email",
                 "required_message": "Email is required.",
                 "invalid_message": "Invalid email format."},
                {"name": "phone", "label": "Phone Number", "rule": "phone",
                 "required_message": "Phone number is required.",
                 "invalid_message": "Invalid phone number."},
            ],
        },
        {
            "label": "Preferences",
            "fields": [
                {"name": "category", "label": "Product Category", "kind": "select",
                 "options": BUYER_CATEGORIES, "rule": "required-select",
                 "required_message": "Category is required."},
                {"name": "budget", "label": "Estimated Budget", "rule": "required-string",
                 "required_message": "Budget is required."},
                {"name": "notes", "label": "Additional Notes"},
            ],
        },
        {
            "label": "Additional Info",
            "fields": [
                {"name": "country", "label": "Country", "kind": "select",
                 "options": COUNTRIES, "rule": "required-select",
                 "required_message": "Country is required."},
                {"name": "interestedRegions", "label": "Interested Regions", "kind": "multiselect",
                 "options": COUNTRIES, "rule": "required-multiselect",
                 "required_message": "Select at least one region."},
                {"name": "productTypes", "label": "Product Types", "kind": "multiselect",
                 "options": PRODUCT_TYPES, "rule": "required-multiselect",
                 "required_message": "Select at least one product type."},
                {"name": "acceptTerms", "label": "Accept Terms", "kind": "boolean",
                 "rule": "required-true",
                 "required_message": "You must accept terms and conditions."},
            ],
        },
        {
            "label": "Upload Documents",
            "fields": [
                {"name": "documents", "label": "Upload Documents", "kind": "files",
                 "rule": "required-files",
                 "required_message": "Upload at least one document."},
            ],
        },
        {
            "label": "Review & Submit",
            "description": "Review your details before submitting.",
            "fields": [],
        },
    ],
}

SELLER_FLOW: Dict[str, Any] = {
    "name": "seller",
    "title": "Seller Onboarding",
    "storage_key": "sellerOnboardingForm",
    "submit_latency": 2.0,
    "steps": [
        {
            "label": "Basic Info",
            "fields": [
                {"name": "name", "label": "Name", "rule": "required-string",
                 "required_message": "Name is required"},
                {"name": "email", "label": "Email", "rule": "email",
                 "required_message": "Email is required",
                 "invalid_message": "Invalid email"},
                {"name": "phone", "label": "Phone", "rule": "phone",
                 "required_message": "Phone is required",
                 "invalid_message": "Invalid phone"},
                {"name": "businessType", "label": "Business Type", "kind": "select",
                 "options": BUSINESS_TYPES, "rule": "required-select",
                 "required_message": "Select business type"},
                {"name": "yearsExperience", "label": "Years of Experience",
                 "rule": "numeric-optional",
                 "invalid_message": "Invalid experience"},
            ],
        },
        {
            "label": "Products",
            "fields": [
                {"name": "productCategories", "label": "Product Categories", "kind": "multiselect",
                 "options": SELLER_CATEGORIES, "rule": "required-multiselect",
                 "required_message": "Select at least one category"},
                {"name": "mainProducts", "label": "Main Products", "rule": "required-string",
                 "required_message": "Describe main products"},
            ],
        },
        {
            "label": "Operations",
            "fields": [
                {"name": "location", "label": "Location", "rule": "required-string",
                 "required_message": "Location required"},
                {"name": "operationalRegions", "label": "Operational Regions", "kind": "multiselect",
                 "options": OPERATIONAL_REGIONS, "rule": "required-multiselect",
                 "required_message": "Select operational regions"},
                {"name": "priceRange", "label": "Price Range", "rule": "required-string",
                 "required_message": "Price range required"},
            ],
        },
        {
            "label": "Uploads",
            "fields": [
                {"name": "businessLicense", "label": "Business License", "kind": "file",
                 "rule": "required-file",
                 "required_message": "Upload business license"},
                {"name": "productImages", "label": "Product Images", "kind": "files",
                 "rule": "required-files",
                 "required_message": "Upload at least one product image"},
            ],
        },
        {
            "label": "Details",
            "fields": [
                {"name": "description", "label": "Business Description", "rule": "required-string",
                 "required_message": "Business description is required"},
                {"name": "website", "label": "Website / Portfolio URL"},
                {"name": "socialLinks", "label": "Social Media Links (comma separated)"},
            ],
        },
        {
            "label": "Terms & Submit",
            "fields": [
                {"name": "termsAccepted", "label": "Terms Accepted", "kind": "boolean",
                 "rule": "required-true",
                 "required_message": "You must accept terms & conditions"},
            ],
        },
    ],
}

BUILTIN_FLOWS: Dict[str, Dict[str, Any]] = {
    "buyer": BUYER_FLOW,
    "seller": SELLER_FLOW,
}


def get_builtin_flow(name: str) -> Dict[str, Any]:
    """Get a deep copy of a built-in flow definition."""
    if name not in BUILTIN_FLOWS:
        raise KeyError(name)
    return copy.deepcopy(BUILTIN_FLOWS[name])


def list_builtin_flows() -> List[str]:
    """Names of the built-in flows."""
    return list(BUILTIN_FLOWS)


def get_default_settings() -> Dict[str, Any]:
    """Get default settings template (written by `formwizard init`)."""
    return {
        "autosave": {
            "enabled": True,
            "delay_ms": 800,
            "draft_dir": "~/.formwizard/drafts",
        },
        "submission": {
            "validate_all_steps": True,
            "simulate_latency": True,
        },
        "logging": {
            "level": "INFO",
            "file": "~/.formwizard/logs/formwizard.log",
            "log_to_console": False,
            "max_bytes": 10485760,  # 10 MB
            "backup_count": 3,
        },
    }
