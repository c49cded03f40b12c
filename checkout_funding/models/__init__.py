"""Domain enums shared by the eligibility engine and the remembered-funding cache."""
