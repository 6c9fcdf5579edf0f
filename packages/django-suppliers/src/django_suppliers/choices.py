"""Closed enumerations shared by all supplier adapters."""

from django.db import models


class SupplierName(models.TextChoices):
    """Every supplier the registry knows how to build."""

    DATAXPRESS = "dataxpress", "DataXpress"
    HUBNET = "hubnet", "Hubnet"
    DAKAZINA = "dakazina", "DataKazina"
    CODECRAFT = "codecraft", "Code Craft Network"
    SYKESOFFICIAL = "sykesofficial", "SykesOfficial"


class Network(models.TextChoices):
    """Mobile networks a bundle can be delivered on."""

    MTN = "MTN", "MTN"
    AT = "AT", "AirtelTigo (AT iShare)"
    TELECEL = "TELECEL", "Telecel"
