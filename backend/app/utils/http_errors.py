"""
Maps verbal engine exceptions to HTTP errors for the routers.

Usage:
    try:
        question = get_question(db, question_id)
    except VerbalEngineError as e:
        raise to_http_exception(e)
"""

import logging

from fastapi import HTTPException, status

from app.services.errors import (
    InvalidInputError,
    LemmatizerError,
    NotFoundError,
    StorageError,
    VerbalEngineError,
)

logger = logging.getLogger(__name__)


def to_http_exception(error: VerbalEngineError) -> HTTPException:
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, InvalidInputError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, StorageError):
        logger.error("Storage failure: %s", error)
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Storage unavailable")
    if isinstance(error, LemmatizerError):
        logger.error("Lemmatizer failure: %s", error)
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Lemmatizer unavailable")
    logger.error("Unhandled engine error: %s", error, exc_info=True)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error")
