"""
QUILL - Résumé markup to paginated PDF

Turns résumé content (a LaTeX-like markup dialect or free-form generated prose)
into a downloadable PDF through a structured document model.

Architecture:
- Parsing Context: Markup tokenizing, document model building, plain-text sectionizing
- Rendering Context: Pagination, PDF serialization and the render fallback chain
- Generation Context: Profile data, markup generation and response cleanup
"""

__version__ = "0.1.0"
