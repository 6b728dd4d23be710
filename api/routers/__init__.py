"""
API Routers - HTTP endpoint handlers

Each router handles a specific domain of functionality:
- me: the authenticated user and their brand permissions
- brands: brand CRUD with admin and vetting agency sync
- master_claim_brands: claims-side brand aliases
- products, claims: claim management along the brand chain
- content_templates, content: template definitions and content items
- ai, tools: AI copywriting helpers and bulk generators
- health: Health checks and system info
"""
