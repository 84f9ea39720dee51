"""
Custom exception hierarchy for the resume intake and analysis pipeline
"""
from typing import Optional, Dict, Any


class InterviewGeneratorException(Exception):
    """Base exception for all interview generator errors"""
    
    def __init__(
        self, 
        message: str, 
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(InterviewGeneratorException):
    """Authentication and authorization errors"""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="AUTHENTICATION_ERROR",
            details=details
        )


class ValidationError(InterviewGeneratorException):
    """Input validation errors"""
    
    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: str = "VALIDATION_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field
        
        super().__init__(
            message=message,
            error_code=error_code,
            details=error_details
        )


class MissingFileError(ValidationError):
    """No resume file was attached to the request"""
    
    def __init__(self, field: str = "resume"):
        super().__init__(
            message="Please upload a resume file (PDF only)",
            field=field,
            error_code="MISSING_FILE"
        )


class DocumentProcessingError(InterviewGeneratorException):
    """Errors during document intake and text extraction"""
    
    def __init__(
        self, 
        message: str, 
        file_name: Optional[str] = None,
        processing_stage: Optional[str] = None,
        error_code: str = "DOCUMENT_PROCESSING_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if file_name:
            error_details["file_name"] = file_name
        if processing_stage:
            error_details["processing_stage"] = processing_stage
        
        self.file_name = file_name
        self.processing_stage = processing_stage
        super().__init__(
            message=message,
            error_code=error_code,
            details=error_details
        )


class UnsupportedTypeError(DocumentProcessingError):
    """Uploaded file is not the accepted document format"""
    
    def __init__(
        self,
        file_type: Optional[str],
        accepted_type: str,
        file_name: Optional[str] = None,
        reason: Optional[str] = None
    ):
        self.file_type = file_type
        self.accepted_type = accepted_type
        message = reason or f"Unsupported file type: {file_type}. Only {accepted_type} files are allowed"
        
        super().__init__(
            message=message,
            file_name=file_name,
            processing_stage="type_validation",
            error_code="UNSUPPORTED_TYPE",
            details={"file_type": file_type, "accepted_type": accepted_type}
        )


class SizeLimitExceededError(DocumentProcessingError):
    """File size limit exceeded"""
    
    def __init__(self, file_size: int, max_size: int, file_name: Optional[str] = None):
        self.file_size = file_size
        self.max_size = max_size
        
        super().__init__(
            message=f"File size exceeds maximum allowed size of {max_size} bytes",
            file_name=file_name,
            processing_stage="size_validation",
            error_code="FILE_TOO_LARGE",
            details={"file_size": file_size, "max_size": max_size}
        )


class TextExtractionError(DocumentProcessingError):
    """Staged document could not be turned into text"""
    
    def __init__(self, message: str, file_name: Optional[str] = None):
        super().__init__(
            message=message,
            file_name=file_name,
            processing_stage="text_extraction",
            error_code="TEXT_EXTRACTION_ERROR"
        )


class ConfigurationError(InterviewGeneratorException):
    """Required configuration value is missing"""
    
    def __init__(self, setting: str, message: Optional[str] = None):
        self.setting = setting
        super().__init__(
            message=message or f"Missing required configuration: {setting}",
            error_code="CONFIGURATION_ERROR",
            details={"setting": setting}
        )


class ModelInvocationError(InterviewGeneratorException):
    """Errors from the LLM provider call"""
    
    def __init__(
        self, 
        message: str, 
        service_name: Optional[str] = None,
        api_response_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if service_name:
            error_details["service_name"] = service_name
        if api_response_code:
            error_details["api_response_code"] = api_response_code
        
        self.api_response_code = api_response_code
        super().__init__(
            message=message,
            error_code="MODEL_INVOCATION_ERROR",
            details=error_details
        )


class SchemaParseError(InterviewGeneratorException):
    """Model output is not valid JSON or does not match the analysis schema"""
    
    def __init__(self, message: str, raw_excerpt: Optional[str] = None):
        error_details = {}
        if raw_excerpt is not None:
            error_details["raw_excerpt"] = raw_excerpt
        
        super().__init__(
            message=message,
            error_code="SCHEMA_PARSE_ERROR",
            details=error_details
        )


class StorageError(InterviewGeneratorException):
    """Filesystem or record store operation errors"""
    
    def __init__(
        self, 
        message: str, 
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if operation:
            error_details["operation"] = operation
        
        super().__init__(
            message=message,
            error_code="STORAGE_ERROR",
            details=error_details
        )


class InternalError(InterviewGeneratorException):
    """Catch-all for failures with no more specific classification"""
    
    def __init__(self, message: str = "Internal Server Error", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="INTERNAL_ERROR",
            details=details
        )
