from rd_prediction.infrastructure.services.gemini.gemini_service import GeminiEnrichmentService

__all__ = ["GeminiEnrichmentService"]
