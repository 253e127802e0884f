"""Centralised Shopify GraphQL query constants.

All GraphQL strings used by the report and debug endpoints live here so
that ``enrichment`` and the debug routes import from a single source of
truth.  Ids are always passed as variables.
"""

ORDER_METAFIELDS_QUERY = """
query getOrderMetafields($id: ID!) {
  order(id: $id) {
    id
    name
    metafields(first: 10) {
      edges {
        node {
          id
          namespace
          key
          value
          type
        }
      }
    }
  }
}
"""

ORDER_METAFIELDS_WITH_OWNER_QUERY = """
query getOrderMetafields($id: ID!) {
  order(id: $id) {
    id
    name
    metafields(first: 50) {
      edges {
        node {
          id
          namespace
          key
          value
          type
          owner {
            ... on Order {
              id
              name
            }
          }
        }
      }
    }
  }
}
"""

ORDER_FULFILLMENTS_QUERY = """
query getOrderFulfillments($id: ID!) {
  order(id: $id) {
    id
    name
    fulfillments(first: 10) {
      id
      status
      fulfillmentLineItems(first: 50) {
        edges {
          node {
            id
            quantity
            lineItem {
              id
              title
              sku
              quantity
              variant {
                id
                title
              }
              product {
                id
                title
              }
            }
            originalTotalSet {
              shopMoney {
                amount
                currencyCode
              }
            }
          }
        }
      }
    }
  }
}
"""

CUSTOMER_DETAILS_QUERY = """
query getCustomer($id: ID!) {
  customer(id: $id) {
    id
    email
    firstName
    lastName
    displayName
    phone
    tags
    createdAt
    updatedAt
  }
}
"""
