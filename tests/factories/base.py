import faker

Faker = faker.Faker()
