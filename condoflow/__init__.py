"""CondoFlow - condominium water and gas meter reading tracker."""
