from fourfours.tasks.actions import FLOAT_CATALOG, INTEGER_CATALOG, Catalog


def get_catalog(name: str) -> Catalog:
    if name == 'float':
        return FLOAT_CATALOG
    elif name == 'integer':
        return INTEGER_CATALOG
    else:
        raise NotImplementedError(f'catalog {name} not recognized')
