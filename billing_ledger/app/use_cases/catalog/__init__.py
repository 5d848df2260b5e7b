"""Service catalog and funding source registry use cases"""
from .service_codes import (
    CreateServiceCode,
    UpdateServiceCode,
    DeleteServiceCode,
    GetServiceCode,
    ListServiceCodes,
)
from .funding_sources import (
    CreateInsuranceProvider,
    UpdateInsuranceProvider,
    DeleteInsuranceProvider,
    GetInsuranceProvider,
    ListInsuranceProviders,
    CreateFundingProgram,
    UpdateFundingProgram,
    DeleteFundingProgram,
    GetFundingProgram,
    ListFundingPrograms,
)
from .dtos import (
    ListCatalogQueryDTO,
    CreateServiceCodeCommandDTO,
    UpdateServiceCodeCommandDTO,
    ServiceCodeResponseDTO,
    ListServiceCodesResponseDTO,
    CreateInsuranceProviderCommandDTO,
    UpdateInsuranceProviderCommandDTO,
    InsuranceProviderResponseDTO,
    ListInsuranceProvidersResponseDTO,
    CreateFundingProgramCommandDTO,
    UpdateFundingProgramCommandDTO,
    FundingProgramResponseDTO,
    ListFundingProgramsResponseDTO,
)

__all__ = [
    "CreateServiceCode",
    "UpdateServiceCode",
    "DeleteServiceCode",
    "GetServiceCode",
    "ListServiceCodes",
    "CreateInsuranceProvider",
    "UpdateInsuranceProvider",
    "DeleteInsuranceProvider",
    "GetInsuranceProvider",
    "ListInsuranceProviders",
    "CreateFundingProgram",
    "UpdateFundingProgram",
    "DeleteFundingProgram",
    "GetFundingProgram",
    "ListFundingPrograms",
    "ListCatalogQueryDTO",
    "CreateServiceCodeCommandDTO",
    "UpdateServiceCodeCommandDTO",
    "ServiceCodeResponseDTO",
    "ListServiceCodesResponseDTO",
    "CreateInsuranceProviderCommandDTO",
    "UpdateInsuranceProviderCommandDTO",
    "InsuranceProviderResponseDTO",
    "ListInsuranceProvidersResponseDTO",
    "CreateFundingProgramCommandDTO",
    "UpdateFundingProgramCommandDTO",
    "FundingProgramResponseDTO",
    "ListFundingProgramsResponseDTO",
]
