# Services package init
"""
More Than Trip Core — Services Layer
======================================

Service Inventory:
    - stores.BlobStore / stores.MetadataStore: contracts the upload workflow
      depends on
    - S3BlobStore: BlobStore over an S3-compatible bucket (boto3)
    - SqlPhotoStore: MetadataStore over the request's AsyncSession
    - UploadService: blob write → metadata insert orchestration
    - PhotoService, RegionService, TripService, TagService, UserService:
      single-step CRUD over the ORM
    - storage_keys / db_errors: helpers shared by the above
"""
