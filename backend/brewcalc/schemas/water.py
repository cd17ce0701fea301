from pydantic import BaseModel, Field


class WaterIonProfile(BaseModel):
    calcium: float = Field(default=0.0, ge=0, le=600)
    magnesium: float = Field(default=0.0, ge=0, le=200)
    sodium: float = Field(default=0.0, ge=0, le=400)
    chloride: float = Field(default=0.0, ge=0, le=800)
    sulfate: float = Field(default=0.0, ge=0, le=800)
    bicarbonate: float = Field(default=0.0, ge=0, le=600)


class WaterIonSnapshotRead(BaseModel):
    calcium: float
    magnesium: float
    sodium: float
    chloride: float
    sulfate: float
    bicarbonate: float


class WaterAdditionsRequest(BaseModel):
    source: WaterIonProfile = Field(default_factory=WaterIonProfile)
    target: WaterIonProfile = Field(default_factory=WaterIonProfile)
    batch_volume_liters: float = Field(default=20.0, gt=0, le=10000)


class SaltAdditionRead(BaseModel):
    name: str
    amount: float
    unit: str
    rationale: str


class WaterAdditionsRead(BaseModel):
    batch_volume_liters: float
    source_profile: WaterIonSnapshotRead
    target_profile: WaterIonSnapshotRead
    projected_profile: WaterIonSnapshotRead
    additions: list[SaltAdditionRead] = Field(default_factory=list)
    remaining_calcium_ppm: float
    notes: list[str] = Field(default_factory=list)
