from ai.prompts.security_analyst import (
    CLOSING_INSTRUCTION,
    RESPONSE_SHAPE,
    SEVERITY_GUIDELINES,
    SYSTEM_ANALYST,
)

__all__ = ["SYSTEM_ANALYST", "RESPONSE_SHAPE", "SEVERITY_GUIDELINES", "CLOSING_INSTRUCTION"]
