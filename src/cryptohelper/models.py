from pydantic import BaseModel, ConfigDict, Field

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class CryptoComponents(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    public_key_base64: str = Field(alias="publicKeyBase64")
    signed_email_address: str = Field(alias="signedEmailAddress")
    artifact_hash: str = Field(alias="artifactHash")
    artifact_signature: str = Field(alias="artifactSignature")


class TsaRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    artifact_hash: str = Field(alias="artifactHash")
    certificates: bool = True
    hash_algorithm: str = Field(default="sha256", alias="hashAlgorithm")
    nonce: int = Field(ge=INT64_MIN, le=INT64_MAX)
